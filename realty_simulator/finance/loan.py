def monthly_payment(principal: float, annual_rate_percent: float, term_years: float) -> float:
    """Level monthly payment of a fully amortizing loan."""
    num_payments = int(round(term_years * 12))
    if principal <= 0 or num_payments <= 0:
        return 0.0
    monthly_rate = annual_rate_percent / 100 / 12
    if monthly_rate == 0:
        return principal / num_payments
    r = (1 + monthly_rate) ** num_payments
    return principal * monthly_rate * r / (r - 1)


def remaining_balance(principal: float, annual_rate_percent: float, term_years: float,
                      payments_made: int) -> float:
    """Closed-form balance after payments_made level payments, never negative."""
    num_payments = int(round(term_years * 12))
    if principal <= 0 or num_payments <= 0:
        return 0.0
    payments_made = min(max(payments_made, 0), num_payments)
    monthly_rate = annual_rate_percent / 100 / 12
    if monthly_rate == 0:
        return max(0.0, principal * (1 - payments_made / num_payments))
    payment = monthly_payment(principal, annual_rate_percent, term_years)
    growth = (1 + monthly_rate) ** payments_made
    balance = principal * growth - payment * (growth - 1) / monthly_rate
    return max(0.0, balance)
