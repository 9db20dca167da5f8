"""
Portfolio Engine: values a portfolio at current prices and turns position
weights into concentration warnings and per-ticker action suggestions.

Modules
-------
engine : calculate_allocation() + position_weights() + calculate_portfolio_beta()
         + calculate_portfolio_metrics() + detect_concentration_risk()
         + suggest_portfolio_action() + build_portfolio_context().
stress : calculate_portfolio_stress_test(): projects holdings at each
         scenario band's midpoint.

Nothing here raises on messy data: missing prices value a holding at zero,
missing betas count as 1.0, and an empty portfolio yields zeros.
"""
