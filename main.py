import argparse
import json
import logging
import os

import matplotlib
matplotlib.use('Agg')

import realty_simulator as rs


def main():
    parser = argparse.ArgumentParser(description="Run a Monte Carlo simulation of a rental property investment.")
    parser.add_argument('config', nargs='?', default='config.json', help="JSON configuration (see generate_config.py)")
    parser.add_argument('--output-dir', default='output', help="where the report, trials and figures are written")
    parser.add_argument('--workers', type=int, default=1, help="processes used to evaluate trials")
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    with open(args.config, 'r') as f:
        config = json.load(f)

    try:
        report = rs.MonteCarloSimulator().calculate(config, workers=args.workers)
    except rs.ConfigurationError as e:
        parser.error(f"invalid configuration: {e}")

    os.makedirs(args.output_dir, exist_ok=True)
    report.save_json(os.path.join(args.output_dir, 'report.json'))
    rs.simulation.sim.save_json(report.trials, os.path.join(args.output_dir, 'trials.json'))

    analyzer = rs.SimulationAnalyzer(report.trials)
    analyzer.plot_histogram('irr', title="Distribution of IRR (%)").savefig(os.path.join(args.output_dir, 'irr.png'))
    analyzer.plot_sensitivity().savefig(os.path.join(args.output_dir, 'sensitivity.png'))

    irr = report.summary_statistics['irr']
    print(f"Mean IRR: {irr.mean:.2f}% (median {irr.median:.2f}%, std {irr.std_dev:.2f})")
    print(f"Chance of meeting all targets: {report.probability_analysis.meet_all_targets:.1f}%")
    for rec in report.recommendations:
        print(f"[{rec.priority}] {rec.type}: {rec.message} -> {rec.action}")

    print("Simulations complete")

if __name__ == "__main__":
    main()
