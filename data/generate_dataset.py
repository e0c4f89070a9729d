import pandas as pd
import numpy as np

WORKFLOW_STATUSES = ["OPEN", "IN_PROGRESS", "RESOLVED", "CLOSED"]

ISSUE_TEMPLATES = {
    "HARDWARE": [
        {"summary": "Laptop screen flickering after being dropped", "itemType": "Laptop"},
        {"summary": "Desktop will not power on, fan dead", "itemType": "Desktop"},
        {"summary": "Printer paper jam and broken roller", "itemType": "Printer"},
        {"summary": "Keyboard keys not working on lab machine", "itemType": "Peripheral"},
        {"summary": "Projector bulb burnt out in lecture room", "itemType": "Projector"},
    ],
    "SOFTWARE": [
        {"summary": "Office suite crash when opening large spreadsheet", "itemType": "Desktop"},
        {"summary": "Antivirus update error on startup", "itemType": "Laptop"},
        {"summary": "License expired for design software", "itemType": "Desktop"},
        {"summary": "Browser keeps showing certificate error", "itemType": "Laptop"},
        {"summary": "Operating system update failed to install", "itemType": "Desktop"},
    ],
    "NETWORK": [
        {"summary": "Wifi drops every few minutes in staff room", "itemType": "Access Point"},
        {"summary": "No internet connection on second floor", "itemType": "Switch"},
        {"summary": "VPN cannot connect from home", "itemType": "Laptop"},
        {"summary": "Network printer unreachable from office", "itemType": "Printer"},
        {"summary": "Switch port lights off after power cut", "itemType": "Switch"},
    ],
    "PERFORMANCE": [
        {"summary": "Computer very slow to boot in the morning", "itemType": "Desktop"},
        {"summary": "Laptop lag when running video calls", "itemType": "Laptop"},
        {"summary": "Server response times degraded since upgrade", "itemType": "Server"},
        {"summary": "Applications freeze for seconds at a time", "itemType": "Desktop"},
    ],
    "MAINTENANCE": [
        {"summary": "Scheduled maintenance of lab machines", "itemType": "Desktop"},
        {"summary": "Clean dust from server room equipment", "itemType": "Server"},
        {"summary": "Replace toner cartridge in copier", "itemType": "Printer"},
        {"summary": "Quarterly battery check on UPS units", "itemType": "UPS"},
    ],
}

SUMMARY_PREFIXES = ["", "Urgent: ", "Reported by staff: ", "Again ", "User says "]
SUMMARY_SUFFIXES = ["", " please assist", " since yesterday", " in block B", " affecting the whole class"]


def generate_sample_dataset(n_samples: int = 500, label: str = "category", seed: int = 42) -> pd.DataFrame:
    """Generate synthetic work logs.

    ``label="category"`` stores the issue category (HARDWARE, NETWORK, ...) in
    ``status``; ``label="workflow"`` stores a workflow status (OPEN, RESOLVED, ...)
    the way the asset-management store does.
    """
    if label not in ("category", "workflow"):
        raise ValueError(f"label must be 'category' or 'workflow', got {label!r}")

    rng = np.random.default_rng(seed)
    categories = list(ISSUE_TEMPLATES)
    rows = []
    for i in range(n_samples):
        category = categories[rng.integers(len(categories))]
        templates = ISSUE_TEMPLATES[category]
        template = templates[rng.integers(len(templates))]
        summary = (
            SUMMARY_PREFIXES[rng.integers(len(SUMMARY_PREFIXES))]
            + template["summary"]
            + SUMMARY_SUFFIXES[rng.integers(len(SUMMARY_SUFFIXES))]
        )
        if label == "category":
            status = category
        else:
            # older logs are more likely closed out
            status = rng.choice(WORKFLOW_STATUSES, p=[0.2, 0.15, 0.35, 0.3])
        rows.append({
            "status": str(status),
            "issueSummary": summary,
            "itemType": template["itemType"],
            "openedBy": f"user{i % 25}",
        })
    return pd.DataFrame(rows)


def save_sample_dataset(output_path: str, n_samples: int = 500, label: str = "category") -> None:
    """Generate and save a sample work log history"""
    df = generate_sample_dataset(n_samples, label=label)
    df.to_csv(output_path, index=False)
    print(f"Sample work log history with {len(df)} records saved to {output_path}")
    print(f"Status distribution:\n{df['status'].value_counts()}")


if __name__ == "__main__":
    save_sample_dataset("data/work_logs.csv", 500)
