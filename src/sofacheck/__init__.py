"""sofacheck - compare a Mac's macOS version against the SOFA feed."""
