"""
secure_random.py — CSPRNG helpers shared by the generator.
Everything here draws from the `secrets` module (os.urandom underneath).
There is no fallback to `random`: if the OS cannot give us entropy we fail.
"""
import secrets

from pwapi.errors import ValidationError, EntropySourceFailure


def random_int(bound: int) -> int:
    """Return a uniformly distributed integer in [0, bound)."""
    if isinstance(bound, bool) or not isinstance(bound, int) or bound <= 0:
        raise ValidationError(f"Random bound must be a positive integer, got {bound!r}")
    try:
        # randbelow uses rejection sampling, so there is no modulo bias
        return secrets.randbelow(bound)
    except (OSError, NotImplementedError) as e:
        raise EntropySourceFailure(f"Secure random source unavailable: {e}") from e


def secure_choice(chars):
    """Pick one element of a non-empty sequence."""
    return chars[random_int(len(chars))]


def secure_shuffle(items) -> list:
    """Fisher-Yates shuffle into a new list; the input is left untouched."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = random_int(i + 1)
        result[i], result[j] = result[j], result[i]
    return result
