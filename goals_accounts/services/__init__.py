"""
Services Package

- storage: slot media and the Document repository
- records: create/update/delete/get/list for goals and entries
- backup: whole-document backup and restore
"""
