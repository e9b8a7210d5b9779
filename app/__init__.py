"""
Job Platform Backend
Company/employer registration with admin approval, session login and job posts.

Architecture:
- PostgreSQL: Accounts, registration approvals, job and job-finding posts
- MongoDB: Server-side login sessions
- MinIO/S3: Registration proof images
"""

__version__ = "1.0.0"
