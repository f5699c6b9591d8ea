"""
Test package for resourcelibrary_backend.

- test_filters.py: filter variants, query context
- test_query_builder.py: predicate aggregation and filtered queries
- test_forms.py: form builder and value cleaning
- test_customfields.py: custom field handlers and course lifecycle
- test_backup.py: backup and restore of custom field values
- test_resourcelibrary_page.py: page selection and rendering
- test_api.py: HTTP endpoints and error responses
- test_error_registry.py: error registry consistency
"""
