"""
Domain layer containing core business logic and domain services.

Submodules:
- auth: Accounts, sessions, two-factor, tokens, recovery and deactivation.
- channel: Public channel lookups.
- chat: Stream chat messages and live fan-out.
- cron: Scheduled maintenance jobs.
- follow: Follow edges between users.
- notification: Notification rows and the dispatcher.
- stream: Stream metadata, ingress and room tokens.
- telegram: Telegram bot command handling.
- utils: Domain-specific utilities (e.g., ID generation).
"""
