"""Student portal API: enrollment, curriculum and progress dashboards."""
