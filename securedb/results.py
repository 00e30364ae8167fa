"""
=====================================
Tagged results for raw queries.
=====================================

query() cannot know what a caller-supplied statement returns, so it guesses
from the leading keyword (see sql.query_builder.detect_query_type) and tags
the value with the guess:

    SELECT          -> ResultKind.ROW_SET        (list of dicts)
    INSERT          -> ResultKind.GENERATED_ID   (int)
    UPDATE, DELETE  -> ResultKind.AFFECTED_COUNT (int)
    anything else   -> ResultKind.ACK            (True)

The heuristic is deliberate and limited: 'WITH ... SELECT' or
'REPLACE INTO ...' are reported as ACK.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List


class ResultKind(Enum):
    ROW_SET = 'row_set'
    GENERATED_ID = 'generated_id'
    AFFECTED_COUNT = 'affected_count'
    ACK = 'ack'


KEYWORD_RESULT_KINDS: Dict[str, ResultKind] = {
    'SELECT': ResultKind.ROW_SET,
    'INSERT': ResultKind.GENERATED_ID,
    'UPDATE': ResultKind.AFFECTED_COUNT,
    'DELETE': ResultKind.AFFECTED_COUNT,
}


def result_kind_for(keyword: str) -> ResultKind:
    return KEYWORD_RESULT_KINDS.get(keyword, ResultKind.ACK)


@dataclass(frozen=True)
class QueryResult:
    """Value returned by a raw query, tagged with its shape.

    Attributes:
        kind: Which shape value has
        value: Rows, generated id, affected count or True
    """

    kind: ResultKind
    value: Any

    @property
    def rows(self) -> List[Dict[str, Any]]:
        """Rows of a ROW_SET result, [] for every other kind."""
        return self.value if self.kind is ResultKind.ROW_SET else []
