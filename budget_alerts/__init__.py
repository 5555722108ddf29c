"""budget-alerts: place AWS cost budgets on the minimal set of OUs."""
