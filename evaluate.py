#!/usr/bin/env python3

import sys
import os
import json
import hashlib
import argparse
from pathlib import Path
from datetime import datetime, timezone
from sklearn.model_selection import train_test_split
from sklearn.metrics import accuracy_score, classification_report, confusion_matrix
import pandas as pd

# Add the project root to the Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from asset_triage.models.classifier import IssueClassifier
from asset_triage.worklogs import read_frame, records_from_frame
from asset_triage.config import settings
from data.generate_dataset import save_sample_dataset


def _hash_file(path: str) -> str:
    h = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def _stratify_column(df: pd.DataFrame):
    # train_test_split refuses to stratify when a class has a single member
    counts = df['status'].value_counts()
    return df['status'] if len(counts) > 1 and counts.min() >= 2 else None


def evaluate_model(
    data_path: str,
    output_dir: str = "reports",
    validation_split: float | None = None,
    min_class_samples: int = 1,
):
    """Train the issue classifier on a split of the work log history and score the rest.

    Nothing is persisted except the metrics report; the classifier is
    retrained from the history on every run.

    Parameters:
        data_path: CSV or JSON work log export with status and issueSummary columns
        output_dir: Directory for metrics.json
        validation_split: Fraction held out for scoring (defaults to settings.VALIDATION_SPLIT)
        min_class_samples: Warn if any status has fewer training samples than this
    """
    split = settings.VALIDATION_SPLIT if validation_split is None else validation_split
    if not 0 < split < 1:
        raise ValueError("validation_split must be between 0 and 1")

    if not os.path.exists(data_path):
        print(f"Data file not found: {data_path}")
        print("Generating sample work log history...")
        save_sample_dataset(data_path, 500)

    df = read_frame(data_path)
    df = df.assign(status=df['status'].fillna('UNKNOWN') if 'status' in df.columns else 'UNKNOWN')
    print(f"Loaded {len(df)} work logs")
    print("\nStatus distribution:")
    print(df['status'].value_counts())

    train_df, val_df = train_test_split(
        df,
        test_size=split,
        random_state=settings.RANDOM_SEED,
        shuffle=True,
        stratify=_stratify_column(df),
    )

    counts = train_df['status'].value_counts()
    too_small = counts[counts < min_class_samples]
    if len(too_small) > 0:
        print(f"WARNING: Statuses below min samples in training set: {too_small.to_dict()}")

    print(f"Training samples: {len(train_df)} | Validation samples: {len(val_df)}")

    classifier = IssueClassifier(records_from_frame(train_df))
    print(f"Vocabulary size: {classifier.model.vocabulary_size} | Categories: {', '.join(classifier.categories)}")

    val_records = records_from_frame(val_df)
    y_true = [r.status for r in val_records]
    results = [classifier.classify(r.issue_summary, r.item_type or "") for r in val_records]
    y_pred = [r.category for r in results]

    labels = list(classifier.categories)
    report = classification_report(y_true, y_pred, labels=labels, output_dict=True, zero_division=0)
    metrics = {
        'created_at': datetime.now(timezone.utc).isoformat(),
        'data_path': data_path,
        'data_sha256': _hash_file(data_path),
        'n_train_samples': int(len(train_df)),
        'n_val_samples': int(len(val_df)),
        'accuracy': float(accuracy_score(y_true, y_pred)),
        'macro_f1': report.get('macro avg', {}).get('f1-score'),
        'report': report,
        'labels': labels,
        'confusion_matrix': confusion_matrix(y_true, y_pred, labels=labels).tolist(),
        'severity_distribution': {
            k: int(v) for k, v in pd.Series([r.severity.value for r in results]).value_counts().items()
        },
        'mean_confidence': float(pd.Series([r.confidence for r in results]).mean()) if results else None,
    }

    os.makedirs(output_dir, exist_ok=True)
    metrics_path = os.path.join(output_dir, 'metrics.json')
    with open(metrics_path, 'w', encoding='utf-8') as f:
        json.dump(metrics, f, indent=2)

    print(f"\nAccuracy: {metrics['accuracy']:.3f} | Macro F1: {metrics['macro_f1']:.3f}")
    print(f"Metrics written to {metrics_path}")

    print("\nSample classifications:")
    for description, item_type in [
        ("Laptop screen broken after fall", "Laptop"),
        ("Wifi is slow in the library", "Access Point"),
        ("Schedule maintenance for printers", "Printer"),
    ]:
        result = classifier.classify(description, item_type)
        print(f"{description!r}")
        print(f"  -> {result.category} (confidence: {result.confidence:.3f}), severity {result.severity.value}, "
              f"{result.estimated_resolution_time}h, {result.suggested_technician}, priority {result.priority}")
    return metrics


def main():
    parser = argparse.ArgumentParser(description="Evaluate the work log issue classifier on a held-out split")
    parser.add_argument(
        "--data",
        default=settings.WORK_LOG_PATH,
        help="Path to the work log history (CSV or JSON)"
    )
    parser.add_argument(
        "--output-dir",
        default="reports",
        help="Directory to write metrics.json"
    )
    parser.add_argument(
        "--validation-split",
        type=float,
        default=None,
        help="Fraction of history held out for scoring"
    )
    parser.add_argument(
        "--min-class-samples",
        type=int,
        default=1,
        help="Warn if any status has fewer than this many training samples"
    )

    args = parser.parse_args()

    try:
        evaluate_model(
            args.data,
            args.output_dir,
            validation_split=args.validation_split,
            min_class_samples=args.min_class_samples,
        )
    except (OSError, ValueError) as e:
        print(f"Error during evaluation: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
