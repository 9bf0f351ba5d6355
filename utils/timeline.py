# utils/timeline.py
from datetime import datetime
from typing import Optional

import pandas as pd

from models.project import Project
from utils.due_dates import BUCKET_LABELS, classify

COLUMNS = ["Item", "Start", "Finish", "Status", "Type", "Bucket"]


def timeline_df_for_project(project: Project, now: Optional[datetime] = None) -> pd.DataFrame:
    """One row per dated task/subtask, spanning task creation to due date."""
    rows = []
    for t in project.tasks:
        rows.append({
            "Item": f"Task: {t.title}",
            "Start": t.created_at,
            "Finish": t.due_date,
            "Status": t.status.value,
            "Type": "Task",
            "Bucket": BUCKET_LABELS[classify(t, now)],
        })
        for st_ in t.subtasks:
            rows.append({
                "Item": f"  ↳ {st_.title}",
                "Start": t.created_at,
                "Finish": st_.due_date,
                "Status": "done" if st_.is_done else "pending",
                "Type": "Subtask",
                "Bucket": None,
            })
    df = pd.DataFrame(rows, columns=COLUMNS)
    if not df.empty:
        df = df.dropna(subset=["Start", "Finish"], how="any")
    return df
