"""
ExactSolver — saved results and the local workspace store.

``result`` holds the tagged result values and their one-line
serialization; ``storage`` keeps named results, command history and
settings in a JSON file.
"""

from workspace.result import (
    MatrixResult,
    Result,
    ScalarResult,
    TextResult,
    VectorResult,
    deserialize_result,
    result_to_csv,
    serialize_result,
    to_result,
)

__all__ = [
    "Result",
    "ScalarResult",
    "VectorResult",
    "MatrixResult",
    "TextResult",
    "to_result",
    "serialize_result",
    "deserialize_result",
    "result_to_csv",
]
