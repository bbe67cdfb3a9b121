import math
import re
import string
from dataclasses import dataclass, field, asdict
from itertools import groupby

from pwapi.errors import ValidationError
from pwapi.secure_random import secure_choice, secure_shuffle


SYMBOLS = '!@#$%^&*()_+-=[]{}|;:,.<>?'

# (name, charset, glyphs dropped when exclude_ambiguous is set), in draw order
CHARACTER_CLASSES = (
    ('uppercase', string.ascii_uppercase, 'IO'),
    ('lowercase', string.ascii_lowercase, 'l'),
    ('numbers',   string.digits,          '01'),
    ('symbols',   SYMBOLS,                ''),
)

MIN_LENGTH       = 4
MAX_LENGTH       = 128
DEFAULT_LENGTH   = 16
MAX_BATCH_SIZE   = 100

GUESSES_PER_SECOND = 10_000_000_000
SECONDS_PER_YEAR   = 31_536_000

SEQUENTIAL_RUNS = tuple(
    seq[i:i + 3]
    for seq in (string.ascii_lowercase, string.digits)
    for i in range(len(seq) - 2)
)
KEYBOARD_PATTERNS = ('qwert', 'asdf', 'zxcv')
LINE_TERMINATORS  = '\n\r\u2028\u2029'

LETTERS_ONLY = re.compile(r'[a-zA-Z]+')
DIGITS_ONLY  = re.compile(r'[0-9]+')

LEVELS = (
    (2,  'very_weak'),
    (4,  'weak'),
    (6,  'fair'),
    (8,  'strong'),
    (10, 'very_strong'),
)


# ── Options ───────────────────────────────────────────────────────────────────
@dataclass
class GenerateOptions:
    length:            int  = DEFAULT_LENGTH
    uppercase:         bool = True
    lowercase:         bool = True
    numbers:           bool = True
    symbols:           bool = True
    exclude_ambiguous: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def _as_int(value):
    """Coerce JSON numbers and numeric strings to int; None when not integral."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        # float() accepts '1_6'
        if '_' in value:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def validate_generate_options(body) -> GenerateOptions:
    """Build GenerateOptions from an untrusted mapping, filling in defaults."""
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')

    options = GenerateOptions()

    if body.get('length') is not None:
        length = _as_int(body['length'])
        if length is None or not MIN_LENGTH <= length <= MAX_LENGTH:
            raise ValidationError(f'Length must be between {MIN_LENGTH} and {MAX_LENGTH}')
        options.length = length

    for name, _, _ in CHARACTER_CLASSES:
        if body.get(name) is not None:
            setattr(options, name, bool(body[name]))

    exclude = body.get('exclude_ambiguous', body.get('excludeAmbiguous'))
    if exclude is not None:
        options.exclude_ambiguous = bool(exclude)

    return options


def validate_batch_count(value) -> int:
    count = None if isinstance(value, str) else _as_int(value)
    if count is None or not 1 <= count <= MAX_BATCH_SIZE:
        raise ValidationError(f'Count must be between 1 and {MAX_BATCH_SIZE}')
    return count


# ── Generation ────────────────────────────────────────────────────────────────
def generate_password(length: int = DEFAULT_LENGTH, uppercase: bool = True,
                      lowercase: bool = True, numbers: bool = True,
                      symbols: bool = True, exclude_ambiguous: bool = False) -> str:
    """Generate a cryptographically secure random password.

    Every enabled character class contributes at least one character. When
    `length` is smaller than the number of enabled classes the password is
    widened to fit them rather than dropping a class.
    """
    if isinstance(length, bool) or not isinstance(length, int) or length < 1:
        raise ValidationError('Length must be a positive integer')

    enabled = {'uppercase': uppercase, 'lowercase': lowercase,
               'numbers': numbers, 'symbols': symbols}
    charset  = ''
    required = []

    for name, chars, ambiguous in CHARACTER_CLASSES:
        if not enabled[name]:
            continue
        if exclude_ambiguous and ambiguous:
            chars = ''.join(c for c in chars if c not in ambiguous)
        charset += chars
        required.append(secure_choice(chars))

    if not charset:
        raise ValidationError('At least one character type must be enabled')

    total = max(length, len(required))
    extra = [secure_choice(charset) for _ in range(total - len(required))]

    return ''.join(secure_shuffle(required + extra))


def generate_batch(count: int, **options) -> list:
    """Generate up to MAX_BATCH_SIZE independent passwords; larger counts are clamped."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValidationError('Count must be at least 1')
    return [generate_password(**options) for _ in range(min(count, MAX_BATCH_SIZE))]


# ── Strength analysis ─────────────────────────────────────────────────────────
@dataclass
class StrengthResult:
    masked_password: str
    score:           int
    level:           str
    feedback:        list = field(default_factory=list)
    entropy:         float = 0.0
    crack_time:      str = 'instant'
    has_lower:       bool = False
    has_upper:       bool = False
    has_number:      bool = False
    has_symbol:      bool = False

    def to_dict(self) -> dict:
        return asdict(self)


def mask_password(password: str) -> str:
    """Keep the first three characters, star out the rest."""
    return password[:3] + '*' * max(0, len(password) - 3)


def score_to_level(score: int) -> str:
    for upper, level in LEVELS:
        if score <= upper:
            return level
    return LEVELS[-1][1]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_crack_time(entropy: float) -> str:
    """Average-case offline crack time at 1e10 guesses per second."""
    try:
        seconds = 2.0 ** entropy / GUESSES_PER_SECOND / 2
    except OverflowError:
        return 'billions of years'

    if seconds < 1:
        return 'instant'
    if seconds < 60:
        return f'{_round_half_up(seconds)} seconds'
    if seconds < 3600:
        return f'{_round_half_up(seconds / 60)} minutes'
    if seconds < 86400:
        return f'{_round_half_up(seconds / 3600)} hours'
    if seconds < SECONDS_PER_YEAR:
        return f'{_round_half_up(seconds / 86400)} days'
    years = seconds / SECONDS_PER_YEAR
    if years < 100:
        return f'{_round_half_up(years)} years'
    if years < 1_000_000:
        return f'{_round_half_up(years / 1000)} thousand years'
    if years < 1_000_000_000:
        return f'{_round_half_up(years / 1_000_000)} million years'
    return 'billions of years'


def has_repeated_run(password: str, run: int = 3) -> bool:
    for char, group in groupby(password):
        if char in LINE_TERMINATORS:
            continue
        if sum(1 for _ in group) >= run:
            return True
    return False


def has_sequential_run(password: str) -> bool:
    lowered = password.lower()
    return any(seq in lowered for seq in SEQUENTIAL_RUNS)


def has_keyboard_pattern(password: str) -> bool:
    lowered = password.lower()
    return any(pattern in lowered for pattern in KEYBOARD_PATTERNS)


def analyze_password_strength(password: str) -> StrengthResult:
    """Rule-based score (0-10), entropy, crack time and feedback for a password."""
    if not isinstance(password, str) or not password:
        raise ValidationError('Password is required')

    feedback = []
    length   = len(password)
    score    = sum(1 for threshold in (8, 12, 16, 20) if length >= threshold)

    has_lower  = any(c in string.ascii_lowercase for c in password)
    has_upper  = any(c in string.ascii_uppercase for c in password)
    has_number = any(c in string.digits for c in password)
    has_symbol = any(c in SYMBOLS for c in password)
    score += has_lower + has_upper + has_number + has_symbol

    if length < 8:
        feedback.append('Password is too short (minimum 8 characters)')
        score -= 2

    if not has_lower:
        feedback.append('Add lowercase letters')
    if not has_upper:
        feedback.append('Add uppercase letters')
    if not has_number:
        feedback.append('Add numbers')
    if not has_symbol:
        feedback.append('Add special characters')

    if has_repeated_run(password):
        feedback.append('Avoid repeated characters')
        score -= 1

    if LETTERS_ONLY.fullmatch(password):
        feedback.append('Mix in numbers and symbols')
        score -= 1

    if DIGITS_ONLY.fullmatch(password):
        feedback.append('Include letters and symbols')
        score -= 2

    if has_sequential_run(password):
        feedback.append('Avoid sequential patterns')
        score -= 1

    if has_keyboard_pattern(password):
        feedback.append('Avoid keyboard patterns')
        score -= 1

    score = max(0, min(10, score))

    alphabet = (26 * has_lower) + (26 * has_upper) + (10 * has_number) + (32 * has_symbol)
    entropy  = length * math.log2(alphabet) if alphabet else 0.0

    if not feedback:
        feedback.append('Password looks strong!')

    return StrengthResult(
        masked_password=mask_password(password),
        score=score,
        level=score_to_level(score),
        feedback=feedback,
        entropy=round(entropy, 2),
        crack_time=estimate_crack_time(entropy),
        has_lower=has_lower,
        has_upper=has_upper,
        has_number=has_number,
        has_symbol=has_symbol,
    )
