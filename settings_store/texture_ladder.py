"""
Texture level ladder editing.

The ladder is two parallel lists:

    limits = [5000, 50000]
    sizes  = [1024, 2048, 8192]
              │     │     └── "greatest" size: everything above the last limit
              │     └──────── models up to 50000 faces get 2048px textures
              └────────────── models up to 5000 faces get 1024px textures

so len(sizes) == len(limits) + 1 at all times.

All functions here are pure: they take lists and return new lists/values.
"""

TEXTURE_SIZE_OPTIONS = (128, 256, 512, 1024, 2048, 4096, 8192, 16384)
MIN_TEXTURE_SIZE = TEXTURE_SIZE_OPTIONS[0]


def is_texture_size(value: int) -> bool:
    """Texture sizes are powers of two, starting at 128."""
    return value >= MIN_TEXTURE_SIZE and value & (value - 1) == 0


def is_monotonic(limits: list[int]) -> bool:
    return all(a <= b for a, b in zip(limits, limits[1:]))


def add_tier(limits: list[int], sizes: list[int]) -> tuple[list[int], list[int]]:
    """
    Append a tier after the last one.

    The new limit is one above the previous last limit (1 if there was none),
    and the new tier reuses the size right before the greatest size, so the
    ladder stays non-decreasing without any further repair.
    """
    new_limit = limits[-1] + 1 if limits else 1
    new_size = sizes[-2] if len(sizes) > 1 else sizes[-1]
    return limits + [new_limit], sizes[:-1] + [new_size, sizes[-1]]


def remove_tier(limits: list[int], sizes: list[int]) -> tuple[list[int], list[int]]:
    """Drop the last tier, keeping the greatest size. ValueError if none is left."""
    if not limits:
        raise ValueError("Only the greatest texture size remains")
    return limits[:-1], sizes[:-2] + [sizes[-1]]


def clamp_limit_at(limits: list[int], index: int, proposed: int) -> int:
    """
    Repair an edited limit against its immediate neighbours.

    Raised to the preceding limit first, then capped at the following one,
    so on a conflict the following neighbour wins:

        clamp_limit_at([5, 10, 3], 1, 3)  → 3
        clamp_limit_at([5, 3, 3], 0, 20)  → 3

    Only adjacency is restored. Two edits on non-adjacent indices can still
    leave the whole ladder non-monotonic; callers editing several entries
    must clamp after each edit, left to right.
    """
    if not 0 <= index < len(limits):
        raise IndexError(f"Texture limit index {index} out of range")

    accepted = proposed
    if index > 0 and accepted < limits[index - 1]:
        accepted = limits[index - 1]
    if index < len(limits) - 1 and accepted > limits[index + 1]:
        accepted = limits[index + 1]
    return accepted
