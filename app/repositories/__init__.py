"""
Repositories - data access layer over the relational store.
"""
from app.repositories.account_repository import (
    AccountRepository, CompanyRepository, EmployerRepository,
)
from app.repositories.post_repository import (
    JobFindingPostRepository, JobPostRepository, PostRepository,
)

__all__ = [
    "AccountRepository",
    "CompanyRepository",
    "EmployerRepository",
    "PostRepository",
    "JobPostRepository",
    "JobFindingPostRepository",
]
