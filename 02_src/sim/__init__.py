"""Scripted debug server."""

from .sim import Sim, create_sim_app

__all__ = ["Sim", "create_sim_app"]
