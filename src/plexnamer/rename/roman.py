"""Roman numeral decoding for "Part IV" style episode markers."""

_ROMAN_VALUES = {
    "M": 1000,
    "D": 500,
    "C": 100,
    "L": 50,
    "X": 10,
    "V": 5,
    "I": 1,
}


def decode_roman(roman: str) -> int:
    """
    Decode a Roman numeral, case-insensitively.

    A letter is subtracted when the next one is worth more and added otherwise.
    Input is not validated: unknown letters count as 0, so garbage still
    yields a number.
    """
    if not roman:
        return 0
    values = [_ROMAN_VALUES.get(ch, 0) for ch in roman.upper()]
    total = 0
    for current, following in zip(values, values[1:]):
        if current < following:
            total -= current
        else:
            total += current
    return total + values[-1]
