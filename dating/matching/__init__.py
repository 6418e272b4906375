"""
Candidate discovery and compatibility scoring.

Responsibilities:
- Score two profiles on shared hobbies and personality-trait closeness.
- Select unseen candidates that fit the requester's gender preference.
- Rank candidates by compatibility score.
- Record swipes and report mutual matches.
"""
