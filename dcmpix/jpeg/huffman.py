# Copyright 2026 dcmpix authors. See LICENSE file for details.
"""Canonical Huffman code tables as used by JPEG (ISO/IEC 10918-1,
Annex C)."""

from typing import Dict, Sequence, Tuple

from dcmpix.errors import FrameDecodeError


class HuffmanTable:
    """A canonical Huffman code table.

    Attributes
    ----------
    codes : dict
        The symbols keyed by ``(bit length, code value)``.
    """

    def __init__(self, codes: Dict[Tuple[int, int], int]) -> None:
        self.codes = codes

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return key in self.codes

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HuffmanTable):
            return self.codes == other.codes

        return NotImplemented

    def __len__(self) -> int:
        return len(self.codes)

    def __repr__(self) -> str:
        return f"HuffmanTable({self.as_bit_strings()!r})"

    def as_bit_strings(self) -> Dict[str, int]:
        """Return the symbols keyed by their code as a string of ``'0'`` and
        ``'1'`` characters.

        Examples
        --------
        >>> build_huffman_table([0, 1] + [0] * 14, [5]).as_bit_strings()
        {'00': 5}
        """
        return {
            format(code, f"0{length}b"): symbol
            for (length, code), symbol in self.codes.items()
        }


def build_huffman_table(
    counts: Sequence[int], symbols: Sequence[int]
) -> HuffmanTable:
    """Return the canonical code table for a DHT segment.

    Codes are assigned in increasing bit length order starting at code
    value 0. After each length the running code is shifted left by one
    (ISO/IEC 10918-1, Section C.2).

    Parameters
    ----------
    counts : sequence of int
        The 16 *BITS* values, the number of codes of each length from 1 to
        16 bits.
    symbols : sequence of int
        The *HUFFVAL* symbols, in code order.

    Returns
    -------
    HuffmanTable
        The code table.

    Raises
    ------
    FrameDecodeError
        If the counts don't match the symbols or don't describe a valid
        prefix code.
    """
    if len(counts) != 16:
        raise FrameDecodeError(
            f"A Huffman table requires 16 code length counts, got "
            f"{len(counts)}"
        )

    if sum(counts) != len(symbols):
        raise FrameDecodeError(
            f"The Huffman code length counts describe {sum(counts)} codes "
            f"but {len(symbols)} symbols are available"
        )

    codes = {}
    code = 0
    idx = 0
    for length, count in enumerate(counts, start=1):
        for _ in range(count):
            if code >= 1 << length:
                raise FrameDecodeError(
                    "The Huffman code length counts overflow the "
                    f"{length}-bit code space"
                )
            codes[(length, code)] = symbols[idx]
            code += 1
            idx += 1

        code <<= 1

    return HuffmanTable(codes)
