"""Domain models and value objects for the tracker request pipeline."""
