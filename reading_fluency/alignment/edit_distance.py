"""Word-level edit distance and alignment path."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

AlignmentOp = Tuple[str, Optional[int], Optional[int]]


def edit_distance_matrix(ref: Sequence[str], hyp: Sequence[str]) -> List[List[int]]:
    """Full Levenshtein matrix over whole-word tokens.

    dp[i][j] is the cost of turning ref[:i] into hyp[:j]; substitution costs
    0 for equal words and 1 otherwise, insertions and deletions cost 1.
    """
    n, m = len(ref), len(hyp)
    dp = [[0] * (m + 1) for _ in range(n + 1)]

    for i in range(n + 1):
        dp[i][0] = i
    for j in range(m + 1):
        dp[0][j] = j

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            cost_sub = 0 if ref[i - 1] == hyp[j - 1] else 1
            dp[i][j] = min(
                dp[i - 1][j] + 1,
                dp[i][j - 1] + 1,
                dp[i - 1][j - 1] + cost_sub,
            )
    return dp


def align_sequences(
    ref: Sequence[str], hyp: Sequence[str], dp: Optional[List[List[int]]] = None
) -> List[AlignmentOp]:
    """Backtrace the edit-distance matrix into a path of operations.

    Returns list of tuples: (op, ref_index, hyp_index)
      op in {"match","sub","del","ins"}.

      match -> word read correctly
      sub -> word read as something else
      del -> missed word
      ins -> extra spoken word

    At each cell the diagonal step wins when it is consistent with the matrix,
    then the deletion step, then the insertion step.

    Args:
        ref: Reference sequence (normalized words of the passage)
        hyp: Hypothesis sequence (normalized words of the transcript)
        dp: Precomputed matrix from edit_distance_matrix, if available

    Returns:
        List of (operation, ref_index, hyp_index) in reading order
    """
    if dp is None:
        dp = edit_distance_matrix(ref, hyp)

    ops: List[AlignmentOp] = []
    i, j = len(ref), len(hyp)
    while i > 0 or j > 0:
        if i > 0 and j > 0:
            cost_sub = 0 if ref[i - 1] == hyp[j - 1] else 1
            if dp[i][j] == dp[i - 1][j - 1] + cost_sub:
                ops.append(("match" if cost_sub == 0 else "sub", i - 1, j - 1))
                i -= 1
                j -= 1
                continue

        if i > 0 and dp[i][j] == dp[i - 1][j] + 1:
            ops.append(("del", i - 1, None))
            i -= 1
            continue

        if j > 0 and dp[i][j] == dp[i][j - 1] + 1:
            ops.append(("ins", None, j - 1))
            j -= 1
            continue

        break
    ops.reverse()
    return ops


def match_vector(ref: Sequence[str], ops: Sequence[AlignmentOp]) -> List[bool]:
    """One flag per reference position: True when the word was matched."""
    matched = [False] * len(ref)
    for op, ri, _ in ops:
        if op == "match" and ri is not None:
            matched[ri] = True
    return matched
