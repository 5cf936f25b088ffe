"""
Image-locality scheduler extender package.

Modules:
- models: pod, node and host-priority records decoded from extender requests
- priorities: scoring methods and the static registry of them
- api: Flask app exposing one prioritize route per scoring method
- config: immutable process configuration (bind address, route prefixes)
- policy: scheduler-side policy document pointing at this extender
- k8s: adapters from Kubernetes client objects to the extender models
"""
