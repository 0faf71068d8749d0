import pandas as pd
import numpy as np
import uuid

def generate_mock_couriers(num_couriers=300, output_file="mock_couriers.csv", seed=None):
    """
    Generates a courier availability snapshot for exercising new-order dispatch.
    The mix is deliberately messy, like a live fleet: some couriers offline,
    some without a registered device, some that never reported a location.
    """
    # Center around Lima (Plaza Mayor)
    CENTER_LAT = -12.0464
    CENTER_LON = -77.0428

    rng = np.random.default_rng(seed)

    # Scatter couriers up to ~0.2 degrees (~22 km) away so the 10 km radius actually bites
    lat = CENTER_LAT + rng.uniform(-0.2, 0.2, num_couriers)
    lon = CENTER_LON + rng.uniform(-0.2, 0.2, num_couriers)

    # 75% online, 90% with a push token, 10% with no reported location
    is_online = rng.random(num_couriers) < 0.75
    has_token = rng.random(num_couriers) < 0.9
    has_location = rng.random(num_couriers) >= 0.1

    df = pd.DataFrame({
        "courier_id": [f"CR-{str(i + 1).zfill(4)}" for i in range(num_couriers)],
        "is_online": is_online,
        "push_token": [
            f"ExponentPushToken[{uuid.uuid4().hex[:22]}]" if token else None for token in has_token
        ],
        "current_latitude": np.where(has_location, np.round(lat, 6), np.nan),
        "current_longitude": np.where(has_location, np.round(lon, 6), np.nan),
    })

    df.to_csv(output_file, index=False)
    print(f"Generated {num_couriers} couriers into '{output_file}'.")

    online = df[df["is_online"]]
    print(f"  online: {len(online)}  with token: {online['push_token'].notna().sum()}"
          f"  without location: {online['current_latitude'].isna().sum()}")
    return df

if __name__ == "__main__":
    generate_mock_couriers()
