import os
import sys
import json
from dataclasses import asdict, is_dataclass
from datetime import date

import numpy as np
import pandas as pd

import bep_engine as engine
import bep_report
from bep_models import snapshot_from_dict


def to_serializable(o):
    """
    Recursive conversion of engine results into JSON-safe Python types.

    Non-finite floats (unreachable BEP) become None.
    """
    if is_dataclass(o) and not isinstance(o, type):
        return to_serializable(asdict(o))
    if isinstance(o, dict):
        return {k: to_serializable(v) for k, v in o.items()}
    if isinstance(o, (list, tuple)):
        return [to_serializable(v) for v in o]
    if isinstance(o, pd.DataFrame):
        return to_serializable(o.to_dict(orient="records"))
    if isinstance(o, np.ndarray):
        return to_serializable(o.tolist())
    if isinstance(o, np.generic):
        o = o.item()
    if isinstance(o, float) and not np.isfinite(o):
        return None
    if isinstance(o, (date, pd.Timestamp)):
        return o.isoformat()
    return o


def main(argv=None):
    """Run the BEP calculator on a JSON snapshot exported by the web app and save outputs."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: python run_client.py <snapshot.json> [YYYY-MM] [output_dir]")
        return 2

    snapshot_path = argv[0]
    month = argv[1] if len(argv) > 1 else None
    output_dir = argv[2] if len(argv) > 2 else "output_client"

    if not os.path.exists(snapshot_path):
        raise FileNotFoundError(
            f"Snapshot file is missing: {snapshot_path}.\n"
            "Export the restaurant data as JSON and retry."
        )

    with open(snapshot_path, encoding="utf-8") as f:
        data = json.load(f)

    config = engine.CONFIG.copy()
    config["restaurant_name"] = data.get("restaurantName", data.get("restaurant_name", config["restaurant_name"]))

    if data.get("today"):
        today = pd.Timestamp(data["today"]).date()
    else:
        today = date.today()
        print(f"⚠️  Snapshot has no 'today' - using the system date {today.isoformat()} as reference date")

    snapshot = snapshot_from_dict(data, today=today)
    print(f"Loaded {len(snapshot.menu_items)} menu items and {len(snapshot.daily_sales)} daily sales records")
    print(f"Reference date: {snapshot.today.isoformat()}")

    results = engine.run_full_bep_analysis(snapshot, month=month, config=config)

    os.makedirs(output_dir, exist_ok=True)

    validation = results.get("validation_result") or results.get("validation")
    with open(os.path.join(output_dir, "validation_report.json"), "w", encoding="utf-8") as f:
        json.dump(to_serializable(validation), f, indent=2)

    if "error" in results:
        print(results["error"])
        return 1

    print(results["summary_block"])

    results["menu_analysis_df"].to_csv(os.path.join(output_dir, "menu_analysis.csv"), index=False)
    results["daily_sales_df"].to_csv(os.path.join(output_dir, "daily_sales.csv"), index=False)

    summary = {
        "month": results["month"],
        "bep": results["bep"],
        "monthly_analysis": results["monthly_analysis"],
        "alerts": results["alerts"],
        "suggestions": results["suggestions"],
    }
    with open(os.path.join(output_dir, "bep_summary.json"), "w", encoding="utf-8") as f:
        json.dump(to_serializable(summary), f, indent=2, ensure_ascii=False)

    with open(os.path.join(output_dir, "summary_block.txt"), "w", encoding="utf-8") as f:
        f.write(results["summary_block"])

    bep_report.save_all_charts(results, output_dir=output_dir, config=config)
    bep_report.export_results_to_excel(results, os.path.join(output_dir, "report_data.xlsx"))

    print(f"Wrote client outputs (CSVs, charts, summary JSON/TXT, Excel workbook) to ./{output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
