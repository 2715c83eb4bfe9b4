"""Fix planning, execution and learning."""
