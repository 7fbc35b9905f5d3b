"""
Domain layer of the task store: the Task entity, the listing filter and the
typed exceptions raised by store operations.
"""
