"""Datos estáticos empaquetados (catálogo de respaldo)."""
