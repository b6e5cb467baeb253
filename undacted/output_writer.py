"""
Output generation for analysis.json.

Handles serialization of an analysis summary together with the parameters
used and, when available, the matched profile.
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Optional

from .models import AnalysisSummary, AnalysisParams, Profile


def build_analysis_record(
    summary: AnalysisSummary,
    params: AnalysisParams,
    profile: Optional[Profile] = None
) -> dict:
    """
    Build the JSON-serializable record for one analysis.

    Args:
        summary: Analysis results
        params: Analysis parameters used
        profile: Best matching profile, if the caller looked one up

    Returns:
        Dictionary ready for json.dump
    """
    return {
        "analysis_timestamp": datetime.now().isoformat(),
        "parameters": params.to_dict(),
        "result": summary.to_dict(),
        "match": profile.to_dict() if profile is not None else None,
    }


def write_analysis_json(
    summary: AnalysisSummary,
    params: AnalysisParams,
    output_path: Path,
    profile: Optional[Profile] = None
) -> Path:
    """
    Write an analysis record to JSON.

    Args:
        summary: Analysis results
        params: Analysis parameters used
        output_path: Path to write JSON file
        profile: Best matching profile, if any

    Returns:
        The path written
    """
    record = build_analysis_record(summary, params, profile)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(record, f, indent=2, ensure_ascii=False)

    return output_path
