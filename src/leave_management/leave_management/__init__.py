"""Leave Management package.

This package is organized by feature modules (users, leaves, notifications,
presence, balances, reports) with a thin Flask controller layer over
service/repository layers.
"""
