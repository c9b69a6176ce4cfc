# fruit_engine_pb2 / fruit_engine_pb2_grpc are compiled from fruit_engine.proto
# by grpcio-tools on first import; "from store_proto import fruit_engine_pb2"
# then works like it does for checked-in protoc output.
import grpc

fruit_engine_pb2, fruit_engine_pb2_grpc = grpc.protos_and_services(
    "store_proto/fruit_engine.proto"
)
