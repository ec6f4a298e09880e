import logging

import matplotlib.pyplot as plt

from osmpoi import OSMPOI, OSMPOIError
from osmpoi.io.vocabulary import StaticVocabulary
from osmpoi.viz import MapStyle, render_interactive

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")


def main():
    print("=== osmpoi: Hospitals in Lagos ===")

    lab = OSMPOI(vocabulary=StaticVocabulary())

    print("1. Resolving 'Lagos' to a bounding box...")
    try:
        bbox = lab.resolve("Lagos")
    except OSMPOIError as e:
        print(f"   Failed to resolve place: {e}")
        return
    print(f"   {bbox}")

    print("2. Building the query...")
    descriptor = lab.build(bbox, {"amenity": "hospital"})
    print(descriptor.to_overpass_ql())

    print("3. Querying Overpass...")
    try:
        collection = lab.execute(descriptor)
    except OSMPOIError as e:
        print(f"   Query failed: {e}")
        return
    print(f"   Data as of {collection.meta.timestamp}")
    for kind in ("points", "lines", "polygons", "multipolygons"):
        print(f"   - {kind}: {len(getattr(collection, kind))}")

    print("4. Rendering...")
    style = {
        "points": MapStyle(fill_color="#d7191c", stroke_color="white", opacity=0.9, stroke_width=0.5, marker_size=30),
        "polygons": MapStyle(fill_color="#fdae61", stroke_color="#d7191c", opacity=0.6, stroke_width=1.0),
    }
    fig, ax = lab.render(collection, base_map="CartoDB.Positron", style=style, title="Hospitals in Lagos")
    fig.savefig("lagos_hospitals.png", dpi=150, bbox_inches="tight")
    plt.close(fig)
    print("   Static map saved: lagos_hospitals.png")

    try:
        m = render_interactive(collection, style=style)
    except ImportError as e:
        print(f"   Skipping interactive map: {e}")
    else:
        m.save("lagos_hospitals.html")
        print("   Interactive map saved: lagos_hospitals.html")

    print("=== Done ===")


if __name__ == "__main__":
    main()
