"""Scenarios for building sample loan books."""

from microcredit.scenarios.demo_portfolio import DemoPortfolioScenario

__all__ = ["DemoPortfolioScenario"]
