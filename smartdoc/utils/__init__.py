"""
Utility Functions Package

Modules:
- chunking: Text chunking and embedding averaging
- rag: Embedding generation, answer synthesis and document analysis
- vector_store: Document and knowledge storage/search on Supabase
- document_processor: Text extraction from uploaded files
- chat_memory: Chat history and feedback
- errors: Error types
"""
