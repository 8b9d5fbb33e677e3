"""Pure domain model: sale records, bounty schedule, alerts and statistics."""
