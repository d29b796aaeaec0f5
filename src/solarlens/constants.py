"""Physical constants and unit conversions for solarlens."""

import jax.numpy as jnp

# Mathematical constants
four_pi = 4 * jnp.pi
eps = 1e-10  # Additive guard for denominators

# Physical constants
G_kg_m_s = 6.67430e-11  # m^3 / (kg s^2)
c = 299792458.0  # Speed of light in m/s
h = 6.62607015e-34  # Planck constant in J⋅s
k_B = 1.380649e-23  # Boltzmann constant in J/K
sigma_SB = 5.67e-8  # Stefan-Boltzmann constant in W⋅m^-2⋅K^-4
wien_b = 2.897e-3  # Wien displacement constant in m⋅K

# Solar parameters
Msun2kg = 1.98847e30  # solar masses to kg
Rsun2m = 6.95700e8  # solar radii to meters
Lsun_W = 3.828e26  # solar luminosity in W
Tsun_K = 5778.0  # solar effective temperature in K
Rearth2m = 6.371e6  # Earth radii to meters

# Length conversions
nm2m = 1e-9  # nanometers to meters
m2nm = 1e9  # meters to nanometers
km2m = 1e3  # kilometers to meters

# Distance conversions
AU2m = 1.495978707e11  # AU to meters
m2AU = 1.0 / AU2m  # meters to AU
ly2m = 9.4607304725808e15  # light years to meters
pc2m = 3.0857e16  # parsecs to meters

# Angular conversions
rad2mas = 206265000.0  # radians to milliarcseconds

# Focal line of the solar gravitational lens
FOCAL_MIN_AU = 547.8  # Minimum focal distance
FOCAL_OPTIMAL_AU = 650.0  # Optimal for visible light
FOCAL_MAX_AU = 900.0  # Maximum useful distance

# Solar corona
CORONA_ELECTRON_DENSITY_CM3 = 1e8  # electrons/cm^3 used for plasma dispersion
CORONA_SATURATION = 1e10  # Brightness inside the solar disk
CORONA_REFERENCE_NM = 550.0  # Wavelength normalization of the corona model
CORONA_ATTENUATION = 0.1 / 500.0  # Exponent of the scattering loss on magnification

# Imaging grid
IMAGE_SIZE = 1024  # Edge length of the sensor grid in pixels
PSF_SIZE = 256  # Edge length of the PSF kernel in pixels

# Spectrograph grid
SPECTRUM_BINS = 2048
SPECTRUM_MIN_NM = 400.0
SPECTRUM_MAX_NM = 2400.0
SPECTRUM_SPAN_NM = SPECTRUM_MAX_NM - SPECTRUM_MIN_NM

# Detection
DETECTION_SNR_THRESHOLD = 5.0  # 5-sigma point source significance
MAGNIFICATION_SENTINEL = 1e12  # Returned for near-perfect alignment
ALIGNMENT_LIMIT = 1e-6  # Normalized impact parameter treated as perfect alignment
