import os
import sys

import matplotlib.pyplot as plt

import realty_simulator as rs


if __name__ == "__main__":

    output_dir = sys.argv[1] if len(sys.argv) > 1 else "output"
    trials_file = os.path.join(output_dir, "trials.json")

    print(f"Loading trials from '{trials_file}'.")

    trials = rs.simulation.sim.load_json(trials_file)
    analyzer = rs.SimulationAnalyzer(trials)
    summary = analyzer.summarize(rs.SimulationSettings().confidence_levels, rs.TargetMetrics())
    for metric, stats in summary['summary_statistics'].items():
        print(f"{metric:>20}: mean={stats.mean:.2f} median={stats.median:.2f} std={stats.std_dev:.2f}")
    for entry in summary['correlations'].sensitivity_ranking:
        print(f"{entry.variable:>20}: r={entry.correlation:+.3f} ({entry.impact})")

    analyzer.plot_histogram('irr', title="Distribution of IRR (%)")
    analyzer.plot_histogram('monthly_cash_flow', title="Distribution of Monthly Cash Flow")
    analyzer.plot_sensitivity()
    plt.show()

    print("Analysis complete.")
