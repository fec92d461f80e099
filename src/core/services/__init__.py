"""Servicios del Core: resolución de contenido, repositorios, búsqueda,
control de acceso y favoritos."""
