"""Bond-family tax treatments registered with TaxTreatmentResolver."""
