"""Engine pieces shared by every command: errors, manifests, probes, dispatch."""
