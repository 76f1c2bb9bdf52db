"""Coverage Bounded Context.

Responsible for RF propagation calculations:
- Services: validate_frequency_ghz, parse_frequency_input, wavelength_m,
  fresnel_radius
"""
