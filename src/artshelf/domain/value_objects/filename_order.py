"""Display-order extraction from artwork filenames.

Hey future me - the RIGHTMOST number wins! Leading numbers in names like
"2024-03_05.jpg" are usually dates or ids, the trailing one is the page/sequence.

Examples:
    extract_order("page-007.jpg")   → 7
    extract_order("2024_03-12.png") → 12
    extract_order("cover.jpg")      → 0
"""

import re

# Digit run, optionally preceded by ONE delimiter ("-" or "_")
ORDER_PATTERN = re.compile(r"[-_]?\d+")

ORDER_DELIMITERS = "-_"


def extract_order(name: str) -> int:
    """Extract a non-negative order key from a file name.

    Args:
        name: File name (or stem). Never fails, empty input allowed.

    Returns:
        Integer value of the last digit run, 0 if the name has no digits
    """
    if not name:
        return 0

    matches = ORDER_PATTERN.findall(name)
    if not matches:
        return 0

    last = matches[-1]
    if last[0] in ORDER_DELIMITERS:
        last = last[1:]
    return int(last, 10)
