"""Planet geometry: tangent frames, projections, lat/lon conversion and horizon distances."""