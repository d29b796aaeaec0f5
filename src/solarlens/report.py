"""Plain-text summaries of pipeline results."""

from solarlens.core.records import PlanetData


def format_planet_report(planet: PlanetData) -> str:
    """Render a planet record as the text summary sent with a discovery.

    Args:
        planet: Output of the detection pipeline.

    Returns:
        A multi-line summary. Undetected records produce a one-line notice.
    """
    if not planet.detected:
        return "No exoplanet detected"

    atm = planet.atmosphere
    lines = [
        "*** EXOPLANET DETECTED ***",
        f"Radius: {planet.radius_earth:.2f} Earth radii",
        f"Temperature: {planet.temperature_kelvin:.0f} K",
        f"Orbital Radius: {planet.orbital_radius_au:.2f} AU",
        f"Albedo: {planet.albedo:.2f}",
        f"Habitable Zone: {'YES' if planet.in_habitable_zone else 'NO'}",
        f"Confidence: {planet.confidence * 100.0:.1f}%",
        "",
        "Atmospheric Composition:",
        f"  O2:  {atm.oxygen:.3f}%",
        f"  CH4: {atm.methane:.3f}%",
        f"  H2O: {atm.water:.3f}%",
        f"  CO2: {atm.co2:.3f}%",
        f"  N2:  {atm.nitrogen:.3f}%",
        "",
        f"Biosignature Score: {atm.biosignature_score * 100.0:.1f}%",
    ]
    return "\n".join(lines)
