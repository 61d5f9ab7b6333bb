"""Infraestrutura do motor: store, persistência e adaptadores."""
