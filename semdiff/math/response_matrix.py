"""
Tabular views of session responses.

Builds pandas DataFrames with sessions as rows and items as columns: the
numeric matrix used for clustering, and the wide table consumed by
exporters.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List

from semdiff.schemas.models import ScaleItem, Session


def response_matrix(sessions: List[Session], items: List[ScaleItem]) -> pd.DataFrame:
    """
    Normalized values of completed sessions as a sessions x items matrix.

    Missing responses are filled with 0, the neutral midpoint, so every
    row has one value per item.

    Args:
        sessions: Sessions of any status
        items: Items in configuration order

    Returns:
        DataFrame indexed by session id with one float column per item id
    """
    item_ids = [item.id for item in items]
    completed = [s for s in sessions if s.is_completed]

    rows = []
    for session in completed:
        row = []
        for item_id in item_ids:
            response = session.response_for(item_id)
            row.append(response.value if response is not None else 0.0)
        rows.append(row)

    return pd.DataFrame(
        np.array(rows, dtype=float).reshape(len(completed), len(item_ids)),
        index=pd.Index([s.session_id for s in completed], name='session_id'),
        columns=pd.Index(item_ids, name='item_id')
    )


def response_table(sessions: List[Session], items: List[ScaleItem]) -> pd.DataFrame:
    """
    One row per session with raw value, normalized value and flip flag per item.

    Sessions of every status are included. Items a session did not answer
    are left empty.

    Args:
        sessions: Sessions of any status
        items: Items in configuration order

    Returns:
        DataFrame with session columns followed by three columns per item
    """
    columns = ['session_id', 'participant_name', 'group', 'status', 'completed_at']
    for item in items:
        columns.extend([f"{item.id}_raw", f"{item.id}_value", f"{item.id}_flipped"])

    records: List[Dict[str, Any]] = []
    for session in sessions:
        record: Dict[str, Any] = {
            'session_id': session.session_id,
            'participant_name': session.participant_name or '',
            'group': session.group_label or '',
            'status': session.status,
            'completed_at': (pd.to_datetime(session.completed_at, unit='ms', utc=True)
                             if session.completed_at else None),
        }
        for item in items:
            response = session.response_for(item.id)
            record[f"{item.id}_raw"] = response.raw_value if response is not None else None
            record[f"{item.id}_value"] = response.value if response is not None else None
            record[f"{item.id}_flipped"] = response.was_flipped if response is not None else None
        records.append(record)

    return pd.DataFrame.from_records(records, columns=columns)
