from typing import Any, Optional, Tuple


class ResultEngineError(Exception):
    pass


class InvalidMarkError(ResultEngineError):
    def __init__(self, mark: Any, subject_code: Optional[str] = None) -> None:
        where = f" for {subject_code}" if subject_code else ""
        super().__init__(f"Invalid mark{where}: {mark!r}. Marks must be numbers between 0 and 100.")
        self.mark = mark
        self.subject_code = subject_code


class InsufficientSubjectsError(ResultEngineError):
    def __init__(self, required: int, available: int, candidates: Tuple[Any, ...] = ()) -> None:
        super().__init__(
            f"Need {required} eligible graded subjects for the division, found {available}"
        )
        self.required = required
        self.available = available
        self.candidates = candidates


class NoDivisionMatchError(ResultEngineError):
    def __init__(self, points: int, table_name: str) -> None:
        super().__init__(f"No division in table '{table_name}' covers {points} points")
        self.points = points
        self.table_name = table_name


class DivisionTableError(ResultEngineError):
    pass


class GradeScaleError(ResultEngineError):
    pass
