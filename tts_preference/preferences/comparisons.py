"""
Comparison records and per-model selection statistics.

A comparison is one listener's choice of preferred model for one audio
file. Statistics count, for every selected model, how often it was chosen
in total and per file index.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from ..exceptions import InvalidInputError


@dataclass(frozen=True)
class Comparison:
    """A single listener selection."""
    user_id: str
    file_index: int
    selected_model: str
    timestamp: Optional[str] = None

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Comparison":
        """Build from a camelCase (userId, fileIndex, ...) or snake_case record."""
        def pick(camel: str, snake: str, default=None):
            if camel in record:
                return record[camel]
            return record.get(snake, default)

        user_id = pick("userId", "user_id")
        file_index = pick("fileIndex", "file_index")
        selected_model = pick("selectedModel", "selected_model")

        for name, value in (("userId", user_id), ("fileIndex", file_index), ("selectedModel", selected_model)):
            if value is None:
                raise InvalidInputError(f"Comparison record is missing {name}: {dict(record)}")

        try:
            file_index = int(file_index)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"fileIndex must be an integer, got {file_index!r}") from e

        return cls(
            user_id=str(user_id),
            file_index=file_index,
            selected_model=str(selected_model),
            timestamp=pick("timestamp", "timestamp"),
        )


@dataclass
class ModelStats:
    """Selection counts for one model."""
    total: int = 0
    by_file: Dict[int, int] = field(default_factory=dict)

    def add(self, file_index: int) -> None:
        self.total += 1
        self.by_file[file_index] = self.by_file.get(file_index, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "byFile": dict(self.by_file)}


def aggregate_model_stats(
    comparisons: Iterable[Comparison],
    user_id: Optional[str] = None,
) -> Dict[str, ModelStats]:
    """
    Count selections per model.

    Args:
        comparisons: Comparison records (or dicts accepted by Comparison.from_dict)
        user_id: If given, only this user's comparisons are counted

    Returns:
        Dict mapping model name to ModelStats, in first-seen order
    """
    stats: Dict[str, ModelStats] = defaultdict(ModelStats)

    for comparison in comparisons:
        if not isinstance(comparison, Comparison):
            comparison = Comparison.from_dict(comparison)
        if user_id is not None and comparison.user_id != user_id:
            continue
        stats[comparison.selected_model].add(comparison.file_index)

    return dict(stats)


def stats_to_frame(stats: Mapping[str, ModelStats]) -> pd.DataFrame:
    """
    Selection counts as a models x file-index DataFrame.

    Missing cells are 0; columns are sorted file indices.
    """
    frame = pd.DataFrame(
        {model: pd.Series(s.by_file, dtype="int64") for model, s in stats.items()}
    ).T
    if frame.empty:
        return pd.DataFrame(index=list(stats.keys()), dtype="int64")
    frame = frame.fillna(0).astype("int64")
    return frame.reindex(columns=sorted(frame.columns))


def selection_shares(
    stats: Mapping[str, ModelStats],
    models: Optional[List[str]] = None,
) -> Dict[str, float]:
    """
    Percentage of all selections that went to each model.

    Args:
        stats: Per-model statistics
        models: Models to report (default: those in stats); unseen models get 0

    Returns:
        Dict mapping model name to share in percent
    """
    models = list(models) if models is not None else list(stats.keys())
    counts = np.array([stats[m].total if m in stats else 0 for m in models], dtype=float)
    total = counts.sum()

    if total == 0:
        return {m: 0.0 for m in models}

    return {m: float(c / total * 100) for m, c in zip(models, counts)}
