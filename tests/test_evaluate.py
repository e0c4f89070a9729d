import json
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from evaluate import evaluate_model
from data.generate_dataset import save_sample_dataset


def test_evaluate_on_generated_history(tmp_path):
    data_path = tmp_path / "work_logs.csv"
    save_sample_dataset(str(data_path), 300)

    metrics = evaluate_model(str(data_path), str(tmp_path / "reports"), validation_split=0.25)

    assert metrics["n_train_samples"] + metrics["n_val_samples"] == 300
    assert metrics["accuracy"] > 0.8
    written = json.loads((tmp_path / "reports" / "metrics.json").read_text(encoding="utf-8"))
    assert written["labels"] == metrics["labels"]
    assert sum(written["severity_distribution"].values()) == metrics["n_val_samples"]


def test_evaluate_generates_missing_history(tmp_path):
    data_path = tmp_path / "missing.csv"
    metrics = evaluate_model(str(data_path), str(tmp_path / "reports"))
    assert data_path.exists()
    assert metrics["n_val_samples"] > 0


def test_evaluate_rejects_bad_split(tmp_path):
    with pytest.raises(ValueError):
        evaluate_model(str(tmp_path / "x.csv"), str(tmp_path), validation_split=1.5)
