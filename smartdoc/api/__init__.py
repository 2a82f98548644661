"""
API Routers

Modules:
- documents: SmartDoc document upload, search, analysis and analytics
- knowledge: SmartKnowledge items, search and stats
- chat: RAG chat queries, history, feedback and suggestions
- health: Health, readiness and liveness probes
"""
