"""
Evaluation options carried between the evaluator and the annotator.

EvaluationOptions is the concrete StrictHash that collaborators pass around
instead of an open dict, so a misspelled option name fails at construction
rather than being ignored.

Defaults:
    stdin               ""   (string or readable stream)
    timeout             0    (seconds; 0 disables the timeout)
    load_path           []   (fresh per instance)
    encoding            None
    filename            None (evaluator picks a temporary file)
    require             ["seeing_is_believing/the_matrix"] (fresh per instance)
    debugger            None
    number_of_captures  inf
    evaluator           None (collaborator's default evaluator)
    annotate            None (collaborator's default annotator)
"""

from __future__ import annotations

import io
import math
from typing import IO, Union

from .record import StrictHash


DEFAULT_REQUIRE = "seeing_is_believing/the_matrix"


class EvaluationOptions(StrictHash):
    """Settings for a single evaluation run."""

    def declare(d):
        d.attribute("stdin", "")
        d.predicate("timeout", 0)
        d.attribute("load_path", factory=list)
        d.attributes(encoding=None, filename=None)
        d.attribute("require", factory=lambda: [DEFAULT_REQUIRE])
        d.predicate("debugger", None)
        d.attributes(number_of_captures=math.inf, evaluator=None, annotate=None)

    def has_timeout(self) -> bool:
        # 0 is truthy for is_timeout(), but means "no timeout" to the evaluator
        return self.timeout > 0

    def has_capture_limit(self) -> bool:
        return not math.isinf(self.number_of_captures)

    def input_stream(self) -> IO[str]:
        """Return ``stdin`` as a readable stream, wrapping plain strings."""
        stdin: Union[str, IO[str]] = self.stdin
        if hasattr(stdin, "readline"):
            return stdin
        return io.StringIO(stdin)
