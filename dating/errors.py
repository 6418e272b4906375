from __future__ import annotations


class ProfileNotFoundError(LookupError):
    """No profile exists for the given user id (profile setup incomplete)."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Profile not found: {user_id}")
        self.user_id = user_id


class ProfileExistsError(ValueError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"Profile already exists: {user_id}")
        self.user_id = user_id


class InvalidSwipeError(ValueError):
    pass


class DuplicateSwipeError(ValueError):
    """The swiper has already swiped on this target."""

    def __init__(self, swiper_id: str, swiped_id: str) -> None:
        super().__init__(f"{swiper_id} already swiped on {swiped_id}")
        self.swiper_id = swiper_id
        self.swiped_id = swiped_id


class StoreFailure(RuntimeError):
    """An underlying profile/swipe store call failed."""
