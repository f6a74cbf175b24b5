from typing import Any, Dict, List, Optional


def ErrorResponseModel(error, code, message):
    return {"error": error, "code": code, "message": message}


class StepReport:
    """Outcome of a write made of several independent store operations.

    There is no rollback: once a step fails the remaining steps are reported
    as skipped so the caller can see exactly how far the write got.
    """

    def __init__(self, step_names: List[str]):
        self.step_names = list(step_names)
        self.steps: List[Dict[str, Any]] = []
        self.inserted_id: Optional[str] = None

    @property
    def completed(self) -> bool:
        return len(self.steps) == len(self.step_names) and all(s["ok"] for s in self.steps)

    def record(self, name: str, result: Any):
        self.steps.append({"name": name, "ok": True, "result": result, "error": None})

    def fail(self, name: str, error: str):
        self.steps.append({"name": name, "ok": False, "result": None, "error": error})
        done = {s["name"] for s in self.steps}
        for remaining in self.step_names:
            if remaining not in done:
                self.steps.append({"name": remaining, "ok": False, "result": None, "error": "skipped"})

    def to_dict(self) -> Dict[str, Any]:
        return {"completed": self.completed, "insertedId": self.inserted_id, "steps": self.steps}
