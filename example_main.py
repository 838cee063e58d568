import os
import json
import bep_engine as engine
import bep_report
import sample_data
from run_client import to_serializable


def main():
    """Run the BEP calculator on the synthetic sample restaurant and save outputs."""

    snapshot = sample_data.generate_sample_snapshot(month="2024-05")
    config = engine.CONFIG.copy()
    config["restaurant_name"] = "Hanok Table (sample)"

    results = engine.run_full_bep_analysis(snapshot, config=config)
    if "error" in results:
        print(results["error"])
        return

    print(results["summary_block"])

    output_dir = "output"
    os.makedirs(output_dir, exist_ok=True)

    results["menu_analysis_df"].to_csv(os.path.join(output_dir, "menu_analysis.csv"), index=False)
    results["daily_sales_df"].to_csv(os.path.join(output_dir, "daily_sales.csv"), index=False)

    with open(os.path.join(output_dir, "bep_summary.json"), "w") as f:
        json.dump(to_serializable({"bep": results["bep"], "monthly_analysis": results["monthly_analysis"]}), f, indent=2)

    with open(os.path.join(output_dir, "summary_block.txt"), "w", encoding="utf-8") as f:
        f.write(results["summary_block"])

    bep_report.save_all_charts(results, output_dir=output_dir, config=config)

    excel_path = os.path.join(output_dir, "report_data.xlsx")
    bep_report.export_results_to_excel(results, excel_path)

    print(f"\nWrote outputs to ./{output_dir}")
    print(f"Saved combined Excel workbook to {excel_path}")


if __name__ == "__main__":
    main()
