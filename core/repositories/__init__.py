"""
Repositories package.

Data access layer using Repository pattern:
- task_repository: Tasks and their membership sets (collaborators, pending invitations)
- user_repository: Users, gamification profiles and badges
"""
