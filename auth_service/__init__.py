"""Servicio de autenticación: registro, login y tokens JWT sobre una tabla 'users'."""
