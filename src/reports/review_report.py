"""
Review Report.

Tabular view of stored reviews: rating summary and CSV export.
"""

import json
import logging
import os
from datetime import datetime
from typing import Dict

import pandas as pd

from src.storage.review_store import ReviewStore

logger = logging.getLogger(__name__)

COLUMNS = [
    "id", "review_date", "rating", "title",
    "place_description", "experience", "user_name",
    "created_at", "updated_at"
]


class ReviewReport:
    """
    Builds reports from the review store.
    """

    def __init__(self, store: ReviewStore):
        """
        Args:
            store: Review store to read from
        """
        self.store = store

    def to_dataframe(self) -> pd.DataFrame:
        """One row per review, newest review_date first."""
        rows = [record.to_dict() for record in self.store.fetch_all()]

        if not rows:
            return pd.DataFrame(columns=COLUMNS)

        df = pd.DataFrame(rows, columns=COLUMNS)
        for column in ("review_date", "created_at", "updated_at"):
            df[column] = pd.to_datetime(df[column])
        return df

    def rating_summary(self) -> Dict:
        """
        Count, average rating and per-star distribution.

        Returns:
            {"total_reviews": int, "average_rating": float | None,
             "distribution": {1: n, ..., 5: n}}
        """
        df = self.to_dataframe()

        counts = df["rating"].value_counts() if not df.empty else pd.Series(dtype=int)
        distribution = {stars: int(counts.get(stars, 0)) for stars in range(1, 6)}

        average = round(float(df["rating"].mean()), 2) if not df.empty else None

        return {
            "total_reviews": len(df),
            "average_rating": average,
            "distribution": distribution
        }

    def export_csv(self, output_dir: str) -> str:
        """
        Write reviews CSV and a JSON rating summary next to it.

        Returns:
            Path to generated CSV file
        """
        df = self.to_dataframe()

        os.makedirs(output_dir, exist_ok=True)
        stamp = datetime.now().strftime("%Y-%m-%d")
        output_path = os.path.join(output_dir, f"reviews_{stamp}.csv")
        df.to_csv(output_path, index=False)

        logger.info(f"Review table saved to {output_path} ({len(df)} reviews)")

        summary_path = os.path.join(output_dir, f"reviews_{stamp}_summary.json")
        with open(summary_path, 'w', encoding='utf-8') as f:
            json.dump(self.rating_summary(), f, indent=2)

        logger.info(f"Rating summary saved to {summary_path}")

        return output_path
