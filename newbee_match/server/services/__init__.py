"""Business logic: match workflow, report reshaping and request dependencies."""
