"""
Average rating aggregation
"""

from typing import Iterable


def compute_average(ratings: Iterable[int]) -> float:
    """
    Arithmetic mean of a listing's ratings, 0.0 for a listing with no reviews.

    Ratings are small integers, so the sum is exact and only the final
    division rounds.
    """
    ratings = list(ratings)
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)
