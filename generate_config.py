import json


def generate_config(output_file='config.json'):
    dists = {
        'rental_income': {'type': 'normal', 'mean': 2500, 'std_dev': 150},
        'vacancy_rate': {'type': 'triangular', 'mean': 5, 'min': 2, 'mode': 5, 'max': 12},
        'operating_expenses': {'type': 'normal', 'mean': 8000, 'std_dev': 600},
        'appreciation_rate': {'type': 'normal', 'mean': 3, 'std_dev': 1.5},
        'exit_cap_rate': {'type': 'uniform', 'mean': 6, 'min': 5.5, 'max': 7},
    }

    config = {
        'investment_parameters': {
            'purchase_price': 300000,
            'down_payment_percent': 25,
            'closing_costs': 9000,
            'holding_period_years': 7,
            'loan_interest_rate': 6.75,
            'loan_term_years': 30,
        },
        'variable_distributions': dists,
        'simulation_settings': {
            'num_simulations': 10000,
            'random_seed': 42,
            'confidence_levels': [5, 10, 25, 50, 75, 90, 95],
        },
        'target_metrics': {'minimum_irr': 10, 'minimum_cash_flow': 0, 'maximum_loss': 0},
    }

    with open(output_file, 'w') as f:
        json.dump(config, f, indent=4)

    print(f"Config saved to {output_file}")

if __name__ == "__main__":
    generate_config()
