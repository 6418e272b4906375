"""
Profile records: identity, preferences, hobby tags and personality traits.
"""
