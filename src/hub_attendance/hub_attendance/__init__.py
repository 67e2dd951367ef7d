"""Hub attendance package.

Feature modules (attendance, geofence, people, observer, client) with a
thin Flask controller layer on top of service/repository layers.
"""
