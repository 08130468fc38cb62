"""Application package for the career guidance platform backend.

This package exposes the service, repository and model modules used by
the FastAPI application: administrative CRUD over the catalogue
(provinces, communes, career categories, careers, schools, classes and
questions), the public career catalogue and the system-admin overview
statistics. Individual modules contain the concrete implementations.
"""
